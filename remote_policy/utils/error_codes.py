"""
Centralized Error Code Registry

Single source of truth for the error codes attached to remote policy failures and
written into log lines.

Usage:
    from remote_policy.utils.error_codes import ErrorCode

    logger.error(f'{request_id} | {ErrorCode.TRANSPORT_FAILED} | {exc}')
"""


class ErrorCode:
    """
    Error code constants.

    Naming Convention:
        - Format: DESCRIPTION = 'RPE###'
        - 0xx: callout side, 1xx: remote side, 9xx: unexpected
    """

    # ========================================================================
    # Callout (RPE001-RPE099)
    # ========================================================================
    ENCODING_FAILED = 'RPE001'  # Host accessor raised while building the wire message
    TRANSPORT_FAILED = 'RPE002'  # Network error, timeout, non-2xx, unparseable body
    PROTOCOL_VIOLATION = 'RPE003'  # Response lacks an ExecutionResult
    EXTRACTION_FAILED = 'RPE004'  # Flow variable missing from the response
    CONFIGURATION_INVALID = 'RPE005'  # remote_execution_url missing or empty

    # ========================================================================
    # Remote handlers (RPE101-RPE199)
    # ========================================================================
    VALIDATION_FAILED = 'RPE101'  # Missing MessageContext or target request message
    CONVERSION_FAILED = 'RPE102'  # Malformed XML or JSON content

    # ========================================================================
    # Unexpected (RPE900-RPE999)
    # ========================================================================
    UNEXPECTED_ERROR = 'RPE900'
