"""RADIUS Protocol Constants and Definitions.

This module contains the standard RADIUS protocol constants as defined in
RFC 2865 (Authentication), RFC 2866 (Accounting), and related RFCs:
packet codes, header and field sizes, and the attribute type codes the codec
itself needs to know about.

The full attribute name table lives in :mod:`radius_codec.radius.dictionary`;
the codec only hard-codes the types whose wire handling is special.
"""

# Standard RADIUS Packet Codes (RFC 2865 §4.1)
# These values represent the first octet of a RADIUS packet
RADIUS_ACCESS_REQUEST = 1  #: Access-Request packet code
RADIUS_ACCESS_ACCEPT = 2  #: Access-Accept packet code
RADIUS_ACCESS_REJECT = 3  #: Access-Reject packet code
RADIUS_ACCOUNTING_REQUEST = 4  #: Accounting-Request packet code
RADIUS_ACCOUNTING_RESPONSE = 5  #: Accounting-Response packet code
RADIUS_ACCESS_CHALLENGE = 11  #: Access-Challenge packet code
RADIUS_STATUS_SERVER = 12  #: Status-Server packet code (RFC 5997)
RADIUS_STATUS_CLIENT = 13  #: Status-Client packet code

# Header layout: Code(1) Identifier(1) Length(2) Authenticator(16)
HEADER_FORMAT = "!BBH"
HEADER_SIZE = 20
AUTHENTICATOR_LENGTH = 16

# Attribute layout: Type(1) Length(1) Value(Length - 2)
ATTRIBUTE_HEADER_SIZE = 2
MAX_ATTRIBUTE_LENGTH = 255
MAX_ATTRIBUTE_VALUE_LENGTH = MAX_ATTRIBUTE_LENGTH - ATTRIBUTE_HEADER_SIZE

# Vendor-Specific layout: Vendor-Id(4) Vendor-Type(1) Vendor-Length(1) Data
VSA_HEADER_FORMAT = "!LBB"
VSA_HEADER_SIZE = 6

# Packet limits
MAX_RADIUS_PACKET_LENGTH = 4096  # RFC 2865 maximum
MAX_HEADER_LENGTH_FIELD = 0xFFFF

# User-Password cipher (RFC 2865 §5.2)
PASSWORD_BLOCK_SIZE = 16
MAX_PASSWORD_LENGTH = 128

# Attribute types with special codec handling
ATTR_USER_NAME = 1
ATTR_USER_PASSWORD = 2
ATTR_NAS_IP_ADDRESS = 4
ATTR_NAS_PORT = 5
ATTR_SERVICE_TYPE = 6
ATTR_REPLY_MESSAGE = 18
ATTR_STATE = 24
ATTR_CLASS = 25
ATTR_VENDOR_SPECIFIC = 26
ATTR_SESSION_TIMEOUT = 27
ATTR_NAS_IDENTIFIER = 32
ATTR_ACCT_STATUS_TYPE = 40
ATTR_ACCT_SESSION_ID = 44

# Vendor IDs (RFC 2865 §5.26)
VENDOR_CISCO = 9
VENDOR_MICROSOFT = 311
VENDOR_JUNIPER = 2636

# Cisco VSA Attribute Types (Vendor-Id: 9)
CISCO_AVPAIR = 1  # Cisco-AVPair (shell:priv-lvl=15, etc.)
