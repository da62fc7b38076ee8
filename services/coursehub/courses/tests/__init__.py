from .test_access import (
    AccessControllerTests,
    ClassifyPathTests,
    DecisionTableTests,
)
from .test_accounts import (
    AccountImportTests,
    AccountLineParsingTests,
    CommandTests,
    IdentityGatewayTests,
)
from .test_content_sync import (
    AssetReferenceTests,
    AssetUploaderTests,
    DocumentOrderingTests,
    ObjectStorageTests,
    SlugTests,
    SyncContentTreeTests,
)
from .test_profiles import ProfileFlagTests, ResolveProfileTests
from .test_screens import (
    AccessGateTests,
    AccountFlowTests,
    AdminScreenTests,
    CoursePageScreenTests,
)

__all__ = [
    "AccessControllerTests",
    "AccessGateTests",
    "AccountFlowTests",
    "AccountImportTests",
    "AccountLineParsingTests",
    "AdminScreenTests",
    "AssetReferenceTests",
    "AssetUploaderTests",
    "ClassifyPathTests",
    "CommandTests",
    "CoursePageScreenTests",
    "DecisionTableTests",
    "DocumentOrderingTests",
    "IdentityGatewayTests",
    "ObjectStorageTests",
    "ProfileFlagTests",
    "ResolveProfileTests",
    "SlugTests",
    "SyncContentTreeTests",
]
