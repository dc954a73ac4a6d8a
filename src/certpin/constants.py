__module__ = "certpin.constants"

PEM_HEADER = "-----BEGIN CERTIFICATE-----"
PEM_FOOTER = "-----END CERTIFICATE-----"

POLICY_CHAIN_ONLY = "chain_only"
POLICY_STRICT_HOSTNAME = "strict_hostname"
POLICIES = [POLICY_CHAIN_ONLY, POLICY_STRICT_HOSTNAME]
DEFAULT_POLICY = POLICY_STRICT_HOSTNAME

STEP_NORMALISE = "normalise"
STEP_DECODE = "decode"
STEP_CHAIN = "chain"
STEP_VALIDITY = "validity"
STEP_HOSTNAME = "hostname"
STEP_INTERNAL = "internal"

# X509_V_ERR_* codes that describe a validity window problem rather than a broken path
OPENSSL_TIME_ERRNOS = [9, 10, 13, 14]

CHANNEL_NAME = "com.navigate.kas/certificate_validator"
METHOD_VALIDATE_CERTIFICATE = "validateCertificate"
INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
INVALID_ARGUMENTS_MESSAGE = "Missing or invalid arguments"

RESULT_LEVEL_PASS = "pass"
RESULT_LEVEL_FAIL = "fail"
RESULT_LEVEL_WARN = "warn"
RESULT_LEVEL_INFO = "info"
RESULT_LEVEL_PASS_DEFAULT = "PASS!"
RESULT_LEVEL_FAIL_DEFAULT = "FAIL!"
RESULT_LEVEL_WARN_DEFAULT = "WARN!"
RESULT_LEVEL_INFO_DEFAULT = "INFO!"
DEFAULT_MAP = {
    RESULT_LEVEL_PASS: RESULT_LEVEL_PASS_DEFAULT,
    RESULT_LEVEL_FAIL: RESULT_LEVEL_FAIL_DEFAULT,
    RESULT_LEVEL_WARN: RESULT_LEVEL_WARN_DEFAULT,
    RESULT_LEVEL_INFO: RESULT_LEVEL_INFO_DEFAULT,
}

CLI_COLOR_PRIMARY = "cyan"
CLI_COLOR_PASS = "dark_sea_green2"
CLI_COLOR_FAIL = "light_coral"
CLI_COLOR_WARN = "khaki1"
CLI_COLOR_INFO = "deep_sky_blue2"
CLI_COLOR_MAP = {
    RESULT_LEVEL_PASS: CLI_COLOR_PASS,
    RESULT_LEVEL_FAIL: CLI_COLOR_FAIL,
    RESULT_LEVEL_WARN: CLI_COLOR_WARN,
    RESULT_LEVEL_INFO: CLI_COLOR_INFO,
}
CLI_ICON_MAP = {
    RESULT_LEVEL_PASS: ":white_heavy_check_mark:",
    RESULT_LEVEL_FAIL: ":cross_mark:",
    RESULT_LEVEL_WARN: ":warning:",
    RESULT_LEVEL_INFO: ":information:",
}
