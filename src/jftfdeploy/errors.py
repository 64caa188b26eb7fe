"""Domain errors for the JFTF deployment tool."""


class ProvisionerError(RuntimeError):
    """Raised when provisioning cannot continue safely."""
