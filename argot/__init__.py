__title__ = 'argot'
__license__ = 'MIT'
__version__ = "0.1.0"

__import__("logging").getLogger(__name__).addHandler(__import__("logging").NullHandler())

from .keys import *
from .argue import *
from .stream import *
from .faults import *
from .sources import *

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
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the classifier
__all__ += keys.__all__  # type: ignore[attr-defined]
# Load the exposed API of the eager set
__all__ += argue.__all__  # type: ignore[attr-defined]
# Load the exposed API of the stream
__all__ += stream.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the sources
__all__ += sources.__all__  # type: ignore[attr-defined]
