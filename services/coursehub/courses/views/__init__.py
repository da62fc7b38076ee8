"""Export surface for courses.views.

Endpoints live in submodules by concern:
- courses.views.account (login / signup / pending / logout)
- courses.views.content (course list + detail)
- courses.views.admin_users (activation screen)
- courses.views.internal (health)
"""

from .account import *  # noqa: F401,F403
from .admin_users import *  # noqa: F401,F403
from .content import *  # noqa: F401,F403
from .internal import *  # noqa: F401,F403
