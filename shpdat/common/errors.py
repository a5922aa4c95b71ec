"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for conversion failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InputFileError(PipelineError):
    """Raised when an input file is missing or unreadable."""

    error_code = "INPUT_ERROR"


class FormatError(PipelineError):
    """Raised when input bytes violate the shapefile layout."""

    error_code = "FORMAT_ERROR"


class ContractError(PipelineError):
    """Raised when a value does not fit its fixed output width."""

    error_code = "CONTRACT_ERROR"
