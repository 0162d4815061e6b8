class MdowError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:mdow_error'


class StoreError(MdowError):
    """Base exception for paste store errors."""

    error_code = 'store:store_error'


class IdCollisionExhaustedError(StoreError):
    """Raised when every paste id attempted for an insert was already taken.

    This signals a misconfigured id space (alphabet too small, length too short),
    not transient load. It is not retried beyond the store's own attempt limit.
    """

    error_code = 'store:id_collision_exhausted_error'


class WritesHaltedError(StoreError):
    """Raised when the authoritative store stopped accepting writes after a storage failure."""

    error_code = 'store:writes_halted_error'


class ForwardingError(MdowError):
    """Base exception for write forwarding errors."""

    error_code = 'forwarder:forwarding_error'


class AuthoritativeNodeUnavailableError(ForwardingError):
    """Raised when a mutation can't reach the authoritative node.

    The mutation is never downgraded to a local write.
    """

    error_code = 'forwarder:authoritative_node_unavailable_error'


class ConfigurationError(MdowError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
