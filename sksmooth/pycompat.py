import importlib.util


def _has_module(name):
    return importlib.util.find_spec(name) is not None


HAS_CVXOPT = _has_module('cvxopt')
HAS_QUADPROG = _has_module('quadprog')
