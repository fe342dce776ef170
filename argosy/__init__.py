__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argosy'
__license__ = 'MIT'
__version__ = "0.1.0"

from .collection import *
from .commands import *
from .configuration import *
from .decorators import *
from .faults import *
from .help import *
from .options import *
from .parameters import *
from .programs import *
from .reader import *
from .runtime import *
from .settings import *
from .utils import *

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

__all__ += collection.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += configuration.__all__  # type: ignore[attr-defined]
__all__ += decorators.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += help.__all__  # type: ignore[attr-defined]
__all__ += options.__all__  # type: ignore[attr-defined]
__all__ += parameters.__all__  # type: ignore[attr-defined]
__all__ += programs.__all__  # type: ignore[attr-defined]
__all__ += reader.__all__  # type: ignore[attr-defined]
__all__ += runtime.__all__  # type: ignore[attr-defined]
__all__ += settings.__all__  # type: ignore[attr-defined]
__all__ += utils.__all__  # type: ignore[attr-defined]
