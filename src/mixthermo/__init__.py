"""Reference-state, standard-state and Margules excess properties for liquid mixtures."""

__version__ = "0.1.0"
