from .crud_user import user
from .crud_service import service
from . import crud_request
from . import crud_payment
from . import crud_ticket
from . import crud_notification
from . import crud_audit
from . import crud_setting
from . import crud_contact
