from .model import Configuration
from .settings import ProviderSettings
from .sources import ContainerSource, SwarmSource, make_source
from .synthesize import load_config
from .unit import Unit

__version__ = '0.1.0.dev1'

__all__ = ['Configuration', 'ContainerSource', 'ProviderSettings',
           'SwarmSource', 'Unit', 'load_config', 'make_source']
