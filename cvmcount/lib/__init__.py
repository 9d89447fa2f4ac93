from .abstractsketch import AbstractSketch
from .coin import Coin, RandomCoin, FixedCoin, ScriptedCoin
from .cvm import CVM
from .ensemble import CVMEnsemble, MIN_MEMBERS_FOR_ESTIMATE
from .streams import uniform_integers, read_items, take
from .trials import make_sketch, run_test, run_trials, summarize_estimates

__all__ = [
    'AbstractSketch',
    'Coin',
    'RandomCoin',
    'FixedCoin',
    'ScriptedCoin',
    'CVM',
    'CVMEnsemble',
    'MIN_MEMBERS_FOR_ESTIMATE',
    'uniform_integers',
    'read_items',
    'take',
    'make_sketch',
    'run_test',
    'run_trials',
    'summarize_estimates',
]
