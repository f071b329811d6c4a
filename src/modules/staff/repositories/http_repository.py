"""``/funcionarios/`` repository.

Staff records are only read by the console (to label who registered a
sale); maintenance of the staff list happens elsewhere.
"""

from __future__ import annotations

from modules.core.repositories.http_repository import HttpRepository
from modules.staff.models import StaffMember


class StaffHttpRepository(HttpRepository[StaffMember]):
    resource = "funcionarios"
    entity_label = "funcionario"
    entity = StaffMember
