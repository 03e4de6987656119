__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argorder'
__license__ = 'MIT'
__version__ = "0.1.0"

from .arguments import *
from .commands import *
from .faults import *
from .ordering import *
from .reporting import *
from .validator import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the ordering primitives
__all__ += ordering.__all__  # type: ignore[attr-defined]
# Load the exposed API of the reporting
__all__ += reporting.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validator
__all__ += validator.__all__  # type: ignore[attr-defined]
