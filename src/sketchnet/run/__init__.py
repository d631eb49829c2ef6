"""
Sketchnet Run Package

Configuration, the background worker channel, the drawing classifier glue,
and the evolutionary trial / experiment runners.

Modules:
    config:     Config class (INI configuration)
    worker:     Message channel and background NetworkWorker
    classifier: DrawingClassifier host glue
    trial:      Trial abstract base class
    experiment: Experiment class (multiple trials, joblib parallel)
"""

from sketchnet.run.config     import Config
from sketchnet.run.worker     import Endpoint, Message, NetworkWorker, create_channel, validate_values
from sketchnet.run.classifier import DrawingClassifier, Prediction, best_answer, confidence_level, one_hot
from sketchnet.run.trial      import Trial
from sketchnet.run.experiment import Experiment

__all__ = ['Config',
           'Endpoint',
           'Message',
           'NetworkWorker',
           'create_channel',
           'validate_values',
           'DrawingClassifier',
           'Prediction',
           'best_answer',
           'confidence_level',
           'one_hot',
           'Trial',
           'Experiment']
