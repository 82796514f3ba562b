from dataclasses import dataclass

from src.storefront.core.security import PasswordHasher
from src.storefront.core.services import (
    DbSessionService,
    ImageStorageService,
    TokenService,
)
from src.storefront.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    token_service: TokenService
    password_hasher: PasswordHasher
    image_storage: ImageStorageService
    config: ConfigData
