# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.
# Sans cet import, les FK comme students.teacher_id → users.id échouent
# avec NoReferencedTableError si user.py n'est pas chargé avant student.py.

from app.models.user import User  # noqa: F401 (doit précéder les autres)
from app.models.student import Student  # noqa: F401
from app.models.group import Group, GroupMember  # noqa: F401
from app.models.project import Project, Task  # noqa: F401
from app.models.resource import ProjectResource, Resource  # noqa: F401
