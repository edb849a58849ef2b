"""
Exact modular arithmetic for linear recurrences.

Matrix-vector and matrix-matrix products modulo m, and matrix powers, used to
build and apply the jump-ahead tables of the multiple recursive generators.

Python integers have arbitrary precision, so the products a*s never
overflow and no high/low splitting of the multiplicands is needed. All
results are reduced into [0, m), including when inputs hold negative
entries such as the -a13n coefficient of a companion matrix.
"""

from __future__ import annotations

from typing import Sequence

Matrix = Sequence[Sequence[int]]


def mult_mod(a: int, s: int, c: int, m: int) -> int:
    """Return (a*s + c) mod m, in [0, m)."""
    if m <= 0:
        raise ValueError(f"modulus must be positive, got {m}")
    return (a * s + c) % m


def mat_vec_mod(a: Matrix, s: Sequence[int], m: int) -> list[int]:
    """Return (A * s) mod m for a square matrix A and vector s."""
    if len(a[0]) != len(s):
        raise ValueError(f"matrix has {len(a[0])} columns but vector has {len(s)} entries")
    result = []
    for row in a:
        x = 0
        for a_ij, s_j in zip(row, s):
            x = mult_mod(a_ij, s_j, x, m)
        result.append(x)
    return result


def mat_mat_mod(a: Matrix, b: Matrix, m: int) -> list[list[int]]:
    """Return (A * B) mod m."""
    rows = len(a)
    inner = len(b)
    cols = len(b[0])
    if len(a[0]) != inner:
        raise ValueError(f"cannot multiply {rows}x{len(a[0])} by {inner}x{cols}")
    c = [[0] * cols for _ in range(rows)]
    for j in range(cols):
        column = [b[k][j] for k in range(inner)]
        v = mat_vec_mod(a, column, m)
        for i in range(rows):
            c[i][j] = v[i]
    return c


def identity(size: int) -> list[list[int]]:
    """Return the size x size identity matrix."""
    return [[1 if i == j else 0 for j in range(size)] for i in range(size)]


def mat_two_pow_mod(a: Matrix, m: int, e: int) -> list[list[int]]:
    """Return A^(2^e) mod m, computed by e successive squarings."""
    if e < 0:
        raise ValueError(f"exponent must be non-negative, got {e}")
    b = [[x % m for x in row] for row in a]
    for _ in range(e):
        b = mat_mat_mod(b, b, m)
    return b


def mat_pow_mod(a: Matrix, m: int, c: int) -> list[list[int]]:
    """Return A^c mod m using the binary decomposition of c."""
    if c < 0:
        raise ValueError(f"exponent must be non-negative, got {c}")
    w = [[x % m for x in row] for row in a]
    b = identity(len(a))
    n = c
    while n > 0:
        if n & 1:
            b = mat_mat_mod(w, b, m)
        w = mat_mat_mod(w, w, m)
        n >>= 1
    return b
