# Models package
from app.models.user import User, UserRole
from app.models.team import Team, TeamStatus, team_members
from app.models.rack import Rack, RackLocation
from app.models.master_description import MasterDescription, UploadMetadata
from app.models.exported_rack import ExportedRackSnapshot
