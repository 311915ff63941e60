import importlib.metadata

from sksmooth import errors
from sksmooth import optimizers
from sksmooth import smoothing


try:
    __version__ = importlib.metadata.version('scikit-smooth')
except importlib.metadata.PackageNotFoundError:
    # running from a source checkout that was never installed
    __version__ = '0.0.0'


__all__ = ['errors', 'optimizers', 'smoothing']
