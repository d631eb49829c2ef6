import configparser
import os
from sketchnet.activations import activations, make_activation, ActivationFunction

class Config:

    @staticmethod
    def _parse_layer_sizes(raw_sizes):
        """
        Parse layer_sizes from string to list.

        Parameters:
            raw_sizes: Either a comma-separated list of integers, or already a list

        Returns:
            List of layer sizes
        """
        if isinstance(raw_sizes, (list, tuple)):
            sizes = [int(size) for size in raw_sizes]
        else:
            sizes = [int(size.strip()) for size in raw_sizes.split(',') if size.strip()]

        if len(sizes) < 2:
            raise ValueError(f"layer_sizes needs at least 2 entries, got {sizes}")
        if any(size <= 0 for size in sizes):
            raise ValueError(f"layer_sizes must be positive, got {sizes}")
        return sizes

    @staticmethod
    def _parse_activation(raw_name):
        name = raw_name.strip().lower()
        if name not in activations:
            raise ValueError(f"Invalid activation function '{raw_name}'")
        return name

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding the defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a default Config (a 15x15 drawing grid
                         classified into 6 categories).
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.layer_sizes      = [225, 120, 60, 6]
            self.learning_rate    = 0.1
            self.activation       = 'sigmoid'
            self.activation_alpha = None
            self.activation_scale = None
            self.init_min         = -1.0
            self.init_max         = 1.0

            self.training_rounds = 1000

            self.answer_threshold  = 0.4
            self.high_confidence   = 0.7
            self.medium_confidence = 0.4

            self.mutation_min  = -0.1
            self.mutation_max  = 0.1
            self.mutation_rate = 0.05

            self.population_size    = 20
            self.elitism            = 2
            self.survival_threshold = 0.5
            self.max_generations    = 50
            self.fitness_threshold  = 0.99
            self.gradient_rounds    = 0
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [NETWORK]

        # Number of neurons per layer, input width first.
        # The first entry is the length of the input vector (e.g. 225 for a 15x15 grid),
        # the last one the number of categories.
        self.layer_sizes = get_value('NETWORK', 'layer_sizes', str)

        # Learning rate for gradient descent (positive).
        self.learning_rate = get_value('NETWORK', 'learning_rate', float, default=0.1)

        # Activation function shared by all layers.
        # Options: sigmoid, linear, relu, leaky_relu, elu
        self.activation = get_value('NETWORK', 'activation', str, default='sigmoid')

        # Hyperparameters of the activation function.
        # Use "None" to keep the defaults of the chosen function.
        self.activation_alpha = get_value('NETWORK', 'activation_alpha', float, default=None)
        self.activation_scale = get_value('NETWORK', 'activation_scale', float, default=None)

        # Range of the uniform distribution used to initialize weights and biases.
        self.init_min = get_value('NETWORK', 'init_min', float, default=-1.0)
        self.init_max = get_value('NETWORK', 'init_max', float, default=1.0)

        # [TRAINING]

        # Number of gradient descent steps performed for every 'train' request.
        self.training_rounds = get_value('TRAINING', 'training_rounds', int, default=1000)

        # [PREDICTION]

        # The highest output is reported as the answer only if it exceeds this value.
        self.answer_threshold = get_value('PREDICTION', 'answer_threshold', float, default=0.4)

        # Outputs above these values are labeled 'high' and 'medium' confidence.
        self.high_confidence   = get_value('PREDICTION', 'high_confidence',   float, default=0.7)
        self.medium_confidence = get_value('PREDICTION', 'medium_confidence', float, default=0.4)

        # [MUTATION]

        # Range of the uniform distribution from which perturbations are drawn.
        self.mutation_min = get_value('MUTATION', 'mutation_min', float, default=-0.1)
        self.mutation_max = get_value('MUTATION', 'mutation_max', float, default=0.1)

        # Fraction of the weights (and, independently, of the biases) perturbed per mutation.
        self.mutation_rate = get_value('MUTATION', 'mutation_rate', float, default=0.05)

        # [EVOLUTION]

        # The number of networks in each generation.
        self.population_size = get_value('EVOLUTION', 'population_size', int, default=20)

        # The number of fittest networks preserved as-is from one generation to the next.
        self.elitism = get_value('EVOLUTION', 'elitism', int, default=2)

        # The fraction of networks allowed to reproduce.
        self.survival_threshold = get_value('EVOLUTION', 'survival_threshold', float, default=0.5)

        # The number of generations after which to stop a trial.
        self.max_generations = get_value('EVOLUTION', 'max_generations', int, default=50)

        # The fitness value which when met or exceeded by the fittest network ends a trial.
        # Fitness is 1 / (1 + mean squared error), so it lies in (0, 1].
        self.fitness_threshold = get_value('EVOLUTION', 'fitness_threshold', float, default=0.99)

        # Gradient descent rounds applied to every network, per training sample,
        # in each generation (0 = pure evolution).
        self.gradient_rounds = get_value('EVOLUTION', 'gradient_rounds', int, default=0)

    def __setattr__(self, name, value):
        """
        Override 'setattr' to automatically parse layer_sizes and activation when set.
        This allows users to write config.layer_sizes = "225, 60, 6" and have it
        automatically converted to a list of integers.
        """
        if name == 'layer_sizes':
            value = self._parse_layer_sizes(value)
        elif name == 'activation':
            value = self._parse_activation(value)
        super().__setattr__(name, value)

    def make_activation(self) -> ActivationFunction:
        """Build the activation function described by this configuration."""
        return make_activation(self.activation, self.activation_alpha, self.activation_scale)

    def save(self, path: str) -> None:
        """
        Save the configuration to an INI file that 'Config(path)' reads back.

        Parameters:
            path: Path of the file to write
        """
        def as_text(value):
            return 'None' if value is None else str(value)

        parser = configparser.ConfigParser()
        parser['NETWORK'] = {
            'layer_sizes'     : ', '.join(str(size) for size in self.layer_sizes),
            'learning_rate'   : as_text(self.learning_rate),
            'activation'      : self.activation,
            'activation_alpha': as_text(self.activation_alpha),
            'activation_scale': as_text(self.activation_scale),
            'init_min'        : as_text(self.init_min),
            'init_max'        : as_text(self.init_max),
        }
        parser['TRAINING'] = {
            'training_rounds': as_text(self.training_rounds),
        }
        parser['PREDICTION'] = {
            'answer_threshold' : as_text(self.answer_threshold),
            'high_confidence'  : as_text(self.high_confidence),
            'medium_confidence': as_text(self.medium_confidence),
        }
        parser['MUTATION'] = {
            'mutation_min' : as_text(self.mutation_min),
            'mutation_max' : as_text(self.mutation_max),
            'mutation_rate': as_text(self.mutation_rate),
        }
        parser['EVOLUTION'] = {
            'population_size'   : as_text(self.population_size),
            'elitism'           : as_text(self.elitism),
            'survival_threshold': as_text(self.survival_threshold),
            'max_generations'   : as_text(self.max_generations),
            'fitness_threshold' : as_text(self.fitness_threshold),
            'gradient_rounds'   : as_text(self.gradient_rounds),
        }
        with open(path, 'w') as file:
            parser.write(file)
