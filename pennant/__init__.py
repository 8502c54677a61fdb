__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'pennant'
__author__ = 'Pennant contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .convert import *
from .values import *
from .sources import *
from .help import *
from .flags import *
from .flagset import *
from .context import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the converter
__all__ += convert.__all__  # type: ignore[attr-defined]
# Load the exposed API of the values
__all__ += values.__all__  # type: ignore[attr-defined]
# Load the exposed API of the environment/file sources
__all__ += sources.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help renderer
__all__ += help.__all__  # type: ignore[attr-defined]
# Load the exposed API of the flags
__all__ += flags.__all__  # type: ignore[attr-defined]
# Load the exposed API of the flag set
__all__ += flagset.__all__  # type: ignore[attr-defined]
# Load the exposed API of the context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
