# Re-export stages for easy access
from .base import BaseStage, Emitter, ListEmitter
from .http_stage import HttpTransform
from .http_get_stage import HttpGetTransform
