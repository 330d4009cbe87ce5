class AppStatusCode:
    OPERATION_FAILED = "1000"
    INVALID_INPUT = "1001"
    NOT_FOUND = "1002"
    CONFIGURATION_MISSING = "1003"

    AUTHENTICATION_UNAUTHORIZED = "2001"
    AUTHENTICATION_CREDENTIALS_INVALID = "2002"
    AUTHENTICATION_TOKEN_INVALID = "2003"

    INVENTORY_SOLD_OUT = "3001"
