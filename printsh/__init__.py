__title__ = 'printsh'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .commands import *
from .faults import *
from .grouping import *
from .printing import *
from .spawning import *
from .streams import *

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
# Load the exposed API of the grouping helper
__all__ += grouping.__all__  # type: ignore[attr-defined]
# Load the exposed API of the printer
__all__ += printing.__all__  # type: ignore[attr-defined]
# Load the exposed API of the process collaborator
__all__ += spawning.__all__  # type: ignore[attr-defined]
# Load the exposed API of the stream helpers
__all__ += streams.__all__  # type: ignore[attr-defined]
