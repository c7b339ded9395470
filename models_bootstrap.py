# models_bootstrap.py
from account import models as _account_models
from shift import models as _shift_models
from application import models as _application_models
from timesheet import models as _timesheet_models
from finance import models as _finance_models
from review import models as _review_models
from worker_relation import models as _worker_relation_models
from manager import models as _manager_models
from shift_template import models as _shift_template_models
