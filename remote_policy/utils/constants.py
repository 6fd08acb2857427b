class Properties:
    REMOTE_EXECUTION_URL = 'remote_execution_url'


class FlowVariables:
    # Set by the remote endpoint, copied into the outbound message content
    EXAMPLE = 'Example'
    # Selects the remote content transform
    CONVERSION = 'conversion'
    # Diagnostic variable written on the host when a callout aborts
    CALLOUT_EXCEPTION = 'callout_exception'


class Conversions:
    XML_TO_JSON = 'xmltojson'
    JSON_TO_XML = 'jsontoxml'


class Defaults:
    EXAMPLE_FLOW_VARIABLE_VALUE = 'Hello'
    HOST = '0.0.0.0'
    PORT = 8080
