from .facets import Facet, FacetSource, FacetResult, facet_config_dependency_name
from .models import (
    CommonColumns,
    BaseModel,
    BlockConfigurations,
    DIALOG_TYPES,
    DEFAULT_DIALOG_TYPE,
    NoResultFound,
    make_etag,
    with_default_session,
)
from .schemas import (
    BaseSchema,
    BlockConfigurationSchema,
    BlockConfigurationListSchema,
    BlockPlacementSchema,
    BlockSettingsSchema,
)
