from deliberation_core.public import *  # noqa: F403
from deliberation_core.public import __all__  # noqa: F401
