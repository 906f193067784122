"""Montgomery batch inversion over a PrimeField.

The Montgomery trick converts N field inversions into 3N-3 multiplications + 1 inversion.
"""

from typing import TYPE_CHECKING, List, Sequence, Union

import numpy as np

if TYPE_CHECKING:
    from zqfield.field import PrimeField


def batch_inverse(F: "PrimeField", values: Union[Sequence[int], np.ndarray]):
    """Invert every element of values with a single field inversion.

    Algorithm:
    1. Forward pass: cumprods[i] = a[0] * a[1] * ... * a[i]
    2. Single inversion: inv_total = cumprods[N-1]^(-1)
    3. Backward pass: Extract individual inverses using cumprods

    Args:
        F: Field the values belong to
        values: List or numpy array of field elements (must all be non-zero)

    Returns:
        Same kind as the input (list, or object array) with result[i] = values[i]^(-1)

    Raises:
        ZeroDivisionError: If any element is zero
    """
    if isinstance(values, np.ndarray):
        return np.array(_batch_inverse_list(F, values.tolist()), dtype=object)
    return _batch_inverse_list(F, list(values))


def _batch_inverse_list(F: "PrimeField", values: List[int]) -> List[int]:
    n = len(values)
    if n == 0:
        return []

    # Forward pass: compute prefix products
    cumprods = [F.zero] * n
    cumprods[0] = values[0]
    for i in range(1, n):
        cumprods[i] = F.mul(cumprods[i - 1], values[i])

    # A zero anywhere makes the total product zero, so inv() raises here
    z = F.inv(cumprods[n - 1])

    # Backward pass: extract individual inverses
    results = [F.zero] * n
    for i in range(n - 1, 0, -1):
        results[i] = F.mul(z, cumprods[i - 1])
        z = F.mul(z, values[i])
    results[0] = z

    return results
