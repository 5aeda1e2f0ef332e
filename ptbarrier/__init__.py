"""
ptbarrier: closed-form pricing of partial-time barrier options.

Based on:
- Heynen & Kat (1994), "Partial barrier options", J. Financial Engineering
- Haug (2007), "The Complete Guide to Option Pricing Formulas", 2nd ed.
- Genz (2004), bivariate normal probabilities

Core concepts:
- The barrier is watched only before (start) or after (end_b1, end_b2)
  a cover event date
- Prices are sums of bivariate normal CDF terms M(a, b; rho) with
  rho = sqrt(t1 / T) and their reflected images
- Puts, knock-ins and rebates follow from the knock-out call legs by parity
"""

from ptbarrier.errors import InvalidParameter, NumericalInstability
from ptbarrier.bivariate import bivariate_normal_cdf, bivariate_normal_cdf_grid

__version__ = "0.1.0"
