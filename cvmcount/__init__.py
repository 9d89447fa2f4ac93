"""
cvmcount - Streaming distinct-element estimation with the CVM algorithm
"""

from cvmcount.lib.cvm import CVM
from cvmcount.lib.ensemble import CVMEnsemble
from cvmcount.lib.coin import Coin, RandomCoin, FixedCoin, ScriptedCoin
from cvmcount.lib.trials import run_test, run_trials, summarize_estimates

__version__ = '0.1.0'

__all__ = [
    'CVM',
    'CVMEnsemble',
    'Coin',
    'RandomCoin',
    'FixedCoin',
    'ScriptedCoin',
    'run_test',
    'run_trials',
    'summarize_estimates',
]
