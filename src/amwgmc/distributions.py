"""
Log Probability Densities

Log density and log mass functions for use inside log posteriors. Naming and
parameterization follow R's d* functions, except that everything is on the
log scale, so a Normal log density is

    from amwgmc import distributions as ld
    ld.norm(x, mean, sd)

All functions are jitted JAX functions: they accept Python numbers or
arrays (vectorizing elementwise, so a likelihood is jnp.sum(ld.norm(y, mu, sigma)))
and return -inf outside the support.
"""

import jax
import jax.numpy as jnp
import jax.scipy.stats as stats
from jax.scipy.special import betaln as _betaln
from jax.scipy.special import gammaln as _gammaln
from jax.scipy.special import xlog1py, xlogy


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

@jax.jit
def gammaln(x):
    """log |Gamma(x)|"""
    return _gammaln(x)


@jax.jit
def betaln(a, b):
    """log Beta(a, b)"""
    return _betaln(a, b)


@jax.jit
def factorialln(n):
    """log n!, NaN for negative n"""
    n = jnp.asarray(n, dtype=float)
    return jnp.where(n < 0, jnp.nan, _gammaln(n + 1))


@jax.jit
def combinationln(n, m):
    """log of the binomial coefficient C(n, m)"""
    return factorialln(n) - factorialln(m) - factorialln(n - m)


# ============================================================================
# CONTINUOUS DISTRIBUTIONS
# ============================================================================

@jax.jit
def beta(x, shape1, shape2):
    return stats.beta.logpdf(x, shape1, shape2)


@jax.jit
def cauchy(x, location, scale):
    return stats.cauchy.logpdf(x, location, scale)


@jax.jit
def norm(x, mean, sd):
    return stats.norm.logpdf(x, mean, sd)


@jax.jit
def bivarnorm(x, mean, sd, corr):
    """
    Bivariate Normal parameterized by length-2 arrays of means and SDs and
    the correlation.
    """
    x = jnp.asarray(x, dtype=float)
    mean = jnp.asarray(mean, dtype=float)
    sd = jnp.asarray(sd, dtype=float)
    z0 = (x[..., 0] - mean[0]) / sd[0]
    z1 = (x[..., 1] - mean[1]) / sd[1]
    one_minus_r2 = 1.0 - corr ** 2
    quad = (z0 ** 2 + z1 ** 2 - 2.0 * corr * z0 * z1) / one_minus_r2
    log_norm = -(jnp.log(2.0 * jnp.pi) + jnp.log(sd[0]) + jnp.log(sd[1])
                 + 0.5 * jnp.log(one_minus_r2))
    return log_norm - 0.5 * quad


@jax.jit
def laplace(x, location, scale):
    return stats.laplace.logpdf(x, location, scale)


dexp = laplace


@jax.jit
def gamma(x, shape, scale):
    """Gamma with shape and scale (not rate)."""
    return stats.gamma.logpdf(x, shape, scale=scale)


@jax.jit
def invgamma(x, shape, scale):
    safe_x = jnp.where(x > 0, x, 1.0)
    log_dens = (-(shape + 1) * jnp.log(safe_x) - scale / safe_x
                - _gammaln(shape) + shape * jnp.log(scale))
    return jnp.where(x > 0, log_dens, -jnp.inf)


@jax.jit
def lnorm(x, meanlog, sdlog):
    safe_x = jnp.where(x > 0, x, 1.0)
    log_x = jnp.log(safe_x)
    log_dens = (-log_x - 0.5 * jnp.log(2.0 * jnp.pi) - jnp.log(sdlog)
                - (log_x - meanlog) ** 2 / (2.0 * sdlog ** 2))
    return jnp.where(x > 0, log_dens, -jnp.inf)


@jax.jit
def pareto(x, scale, shape):
    safe_x = jnp.where(x >= scale, x, scale)
    log_dens = jnp.log(shape) + shape * jnp.log(scale) - (shape + 1) * jnp.log(safe_x)
    return jnp.where(x >= scale, log_dens, -jnp.inf)


@jax.jit
def t(x, mu, sigma, nu):
    """Location-scale Student t with nu degrees of freedom."""
    return stats.t.logpdf(x, nu, mu, sigma)


@jax.jit
def exp(x, rate):
    return jnp.where(x < 0, -jnp.inf, jnp.log(rate) - rate * x)


@jax.jit
def unif(x, lower, upper):
    inside = (x >= lower) & (x <= upper)
    return jnp.where(inside, -jnp.log(upper - lower), -jnp.inf)


# ============================================================================
# DISCRETE DISTRIBUTIONS
# ============================================================================

@jax.jit
def bern(x, prob):
    valid = (x == 0) | (x == 1)
    return jnp.where(valid, xlogy(x, prob) + xlog1py(1 - x, -prob), -jnp.inf)


@jax.jit
def cat(x, probs):
    """Categorical over 1..len(probs)."""
    probs = jnp.asarray(probs)
    n = probs.shape[-1]
    index = jnp.clip(jnp.asarray(x).astype(jnp.int32) - 1, 0, n - 1)
    valid = (x >= 1) & (x <= n)
    return jnp.where(valid, jnp.log(probs[index]), -jnp.inf)


@jax.jit
def binom(x, size, prob):
    valid = (x >= 0) & (x <= size)
    log_mass = combinationln(size, x) + xlogy(x, prob) + xlog1py(size - x, -prob)
    return jnp.where(valid, log_mass, -jnp.inf)


@jax.jit
def nbinom(x, size, prob):
    """Number of failures before `size` successes."""
    log_mass = combinationln(x + size - 1, size - 1) + xlog1py(x, -prob) + xlogy(size, prob)
    return jnp.where(x >= 0, log_mass, -jnp.inf)


@jax.jit
def hyper(x, m, n, k):
    """x white balls in k draws from an urn of m white and n black balls."""
    valid = (x >= 0) & (x <= k) & (x <= m) & (k - x <= n)
    log_mass = combinationln(m, x) + combinationln(n, k - x) - combinationln(m + n, k)
    return jnp.where(valid, log_mass, -jnp.inf)


@jax.jit
def pois(x, lam):
    safe_x = jnp.where(x >= 0, x, 0)
    log_mass = xlogy(safe_x, lam) - lam - _gammaln(safe_x + 1.0)
    return jnp.where(x >= 0, log_mass, -jnp.inf)
