# Re-export main modules and objects for easier imports
from .errors import ConfigurationError, HttpFailure, MissingFieldError
from .schema import Field, Schema
from .stage_config import HttpGetConfig, StageConfig
from .stages import HttpGetTransform, HttpTransform, ListEmitter
from .config import settings
