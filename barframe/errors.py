# barframe/errors.py
"""
Error taxonomy for element formulation, assembly and queries.

    ConfigurationError          bad or missing input for the requested behaviour
      UnsupportedConfiguration  valid input the closed-form formulations do not cover
    StructuralSingularityError  reduced stiffness singular: structure under-restrained
    DiscontinuityQueryError     exact internal force asked exactly on a jump
"""


class ConfigurationError(ValueError):
    """Raised when element or query input is invalid for the selected behaviour."""
    pass


class UnsupportedConfiguration(ConfigurationError):
    """Raised when a configuration is outside what the closed-form helpers cover."""
    pass


class StructuralSingularityError(RuntimeError):
    """Raised when the free-free stiffness matrix is singular or ill-conditioned."""
    pass


class DiscontinuityQueryError(ValueError):
    """Raised when an exact internal force is requested at a discrete point."""
    pass
