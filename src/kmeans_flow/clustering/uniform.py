import numpy as np

SEED_LOW = -5.0
SEED_HIGH = 5.0


def uniform_init(k: int, n_features: int, rng: np.random.Generator = None):
    """
    Draws initial cluster centers uniformly at random from [-5, 5).

    Used to seed online learning, where no dataset is available yet.

    Args:
        k (int): number of clusters
        n_features (int): dimension of the centers
        rng (np.random.Generator, optional): source of randomness

    Returns:
        np.ndarray: initial centers; shape (k, n_features)
    """
    if rng is None:
        rng = np.random.default_rng()

    # Each component independently: 10 * (U(0, 1) - 0.5)
    return (SEED_HIGH - SEED_LOW) * (rng.random((k, n_features)) - 0.5)
