import unittest

from sksmooth.smoothing.settings import SmootherConfig
from sksmooth.smoothing.settings import SolverSettings
from sksmooth.smoothing.settings import Weights


class TestWeights(unittest.TestCase):

    def test_unpack(self):
        ws, wl, wd = Weights(smoothness=3.0, length=2.0, deviation=1.0)
        self.assertEqual((ws, wl, wd), (3.0, 2.0, 1.0))

    def test_zero_is_allowed(self):
        self.assertEqual(tuple(Weights(0.0, 0.0, 0.0)), (0.0, 0.0, 0.0))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            Weights(smoothness=-1.0)
        with self.assertRaises(ValueError):
            Weights(length=float('nan'))
        with self.assertRaises(ValueError):
            Weights(deviation=float('inf'))


class TestSolverSettings(unittest.TestCase):

    def test_defaults(self):
        settings = SolverSettings()
        self.assertEqual(settings.max_iter, 500)
        self.assertEqual(settings.time_limit, 0.0)
        self.assertFalse(settings.verbose)
        self.assertTrue(settings.scaled_termination)
        self.assertTrue(settings.warm_start)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            SolverSettings(max_iter=0)
        with self.assertRaises(ValueError):
            SolverSettings(time_limit=-1.0)

    def test_from_dict(self):
        settings = SolverSettings.from_dict(
            {'max_iter': 100, 'time_limit': 0.5, 'warm_start': False})
        self.assertEqual(settings.max_iter, 100)
        self.assertEqual(settings.time_limit, 0.5)
        self.assertFalse(settings.warm_start)
        self.assertEqual(SolverSettings.from_dict(settings.to_dict()),
                         settings)
        with self.assertRaises(ValueError):
            SolverSettings.from_dict({'max_iterations': 100})


class TestSmootherConfig(unittest.TestCase):

    def test_defaults(self):
        config = SmootherConfig()
        self.assertEqual(config.weights, Weights())
        self.assertEqual(config.settings, SolverSettings())
        self.assertEqual(config.solver, 'osqp')
        self.assertFalse(config.legacy_offset)

    def test_nested(self):
        config = SmootherConfig.from_dict({
            'weights': {'smoothness': 1e3, 'deviation': 2.0},
            'settings': {'max_iter': 2000, 'verbose': True},
            'solver': 'scipy',
            'legacy_offset': True,
        })
        self.assertEqual(config.weights, Weights(1e3, 1.0, 2.0))
        self.assertEqual(config.settings.max_iter, 2000)
        self.assertTrue(config.settings.verbose)
        self.assertEqual(config.solver, 'scipy')
        self.assertTrue(config.legacy_offset)

    def test_flat(self):
        config = SmootherConfig.from_dict(
            {'smoothness': 10.0, 'length': 0.0, 'time_limit': 0.1})
        self.assertEqual(config.weights, Weights(10.0, 0.0, 1.0))
        self.assertEqual(config.settings.time_limit, 0.1)

    def test_round_trip(self):
        config = SmootherConfig.from_dict(
            {'smoothness': 10.0, 'max_iter': 50, 'solver': 'scipy'})
        self.assertEqual(SmootherConfig.from_dict(config.to_dict()), config)

    def test_unknown_keys(self):
        with self.assertRaises(ValueError):
            SmootherConfig.from_dict({'curvature': 1.0})
        with self.assertRaises(ValueError):
            SmootherConfig.from_dict({'weights': {'curvature': 1.0}})
        with self.assertRaises(ValueError):
            SmootherConfig.from_dict({'settings': {'eps_abs': 1e-3}})
