from .affiliation import Affiliation  # noqa
from .author import Author, AuthorInstitution, AuthorPerson  # noqa
from .base import Base  # noqa
from .contributor import ContributorInstitution, ContributorPerson  # noqa
from .coverage import SpatialTemporalCoverage  # noqa
from .funding_reference import FundingReference  # noqa
from .ggm_properties import GGMProperties  # noqa
from .resource import Description, Resource, Title  # noqa
from .supplementary import (  # noqa
    ContactPerson,
    FreeKeyword,
    OriginatingLaboratory,
    RelatedWork,
    ThesaurusKeyword,
)
from .vocabulary import (  # noqa
    FileFormat,
    Language,
    MathematicalRepresentation,
    ModelType,
    ResourceType,
    Rights,
    Role,
    RoleScope,
    TitleType,
)
from . import _associations  # noqa
