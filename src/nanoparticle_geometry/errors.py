"""
Exception hierarchy for nanoparticle geometry.

Every error is raised at the operation that detects it; nothing in the
package retries a failed computation.
"""


class NanoparticleGeometryError(Exception):
    """Base class for all package errors."""


class DegenerateVectorError(NanoparticleGeometryError, ArithmeticError):
    """Raised when normalizing a zero-length vector.

    Usually means a face table has collinear vertices.
    """


class DivideByZeroError(NanoparticleGeometryError, ZeroDivisionError):
    """Raised when a vector or scalar is divided by zero."""


class PrecisionMismatchError(NanoparticleGeometryError, ValueError):
    """Raised when values of different numeric precision are combined."""

    def __init__(self, *precisions: int):
        self.precisions = precisions
        listed = ", ".join(str(p) for p in precisions)
        super().__init__(f"Values must share one precision, got: {listed}")


class MalformedShapeError(NanoparticleGeometryError, ValueError):
    """Raised when a face table cannot describe a convex shape."""


class InvalidElementError(NanoparticleGeometryError, ValueError):
    """Raised for species labels that are not 1-2 letter element symbols."""


class BuildCancelledError(NanoparticleGeometryError):
    """Raised when a build is cancelled through its cancellation token."""
