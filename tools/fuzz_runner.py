#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Randomized robustness run for the cbor7049 codec.
#
# Generates three fuzz categories:
#   A) random VALID value trees -> encode -> decode must give the tree back
#   B) mutated encodings (bit flips, truncation, splices) -> decode must
#      either return a value or raise CborError, nothing else
#   C) random CBOR sequences -> decode_all must give every item back
#
# Any failure prints a minimal repro payload and exits non-zero.
#
# CBOR_SEED and CBOR_FUZZ_ROUNDS control the run.

import os, sys, math, base64, random, traceback
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import cbor7049

SEED = int(os.environ.get("CBOR_SEED", "4242"))
ROUNDS = int(os.environ.get("CBOR_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def failure(label: str, ctx: Dict[str, Any]) -> None:
    print("FAILURE:", label)
    for k, v in ctx.items():
        print(f"{k.upper()}:", str(v)[:4000])
    raise SystemExit(1)

def same(a: Any, b: Any) -> bool:
    # Whole floats travel as integers.
    if type(a) is int and isinstance(b, float):
        return b.is_integer() and a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        if math.isnan(a):
            return math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    if isinstance(a, list):
        return len(a) == len(b) and all(same(x, y) for x, y in zip(a, b))
    if isinstance(a, dict):
        return list(a) == list(b) and all(same(a[k], b[k]) for k in a)
    return a == b

# --- generators ---

def rand_text(nmax: int) -> str:
    n = random.randint(0, nmax)
    # Mostly ASCII, some multi-byte code points; never surrogates.
    return "".join(
        chr(random.randint(0x20, 0x7E)) if random.random() < 0.8
        else chr(random.choice([0xE9, 0x3B1, 0x4E2D, 0x1F600]))
        for _ in range(n))

def rand_int() -> int:
    bound = random.choice([24, 256, 65536, 2**32, cbor7049.MAX_SAFE_INTEGER])
    return random.randint(-(bound - 1), bound - 1)

def rand_float() -> float:
    return random.choice([
        0.0, -0.0, math.inf, -math.inf, math.nan,
        random.uniform(-1e6, 1e6),
        random.uniform(-1.0, 1.0) * 10.0 ** random.randint(-300, 300),
    ])

def rand_scalar() -> Any:
    pick = random.random()
    if pick < 0.05:
        return random.choice([None, True, False, cbor7049.undefined])
    if pick < 0.35:
        return rand_int()
    if pick < 0.50:
        return rand_float()
    if pick < 0.80:
        return rand_text(18)
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, 24)))

def rand_tree() -> Any:
    def gen(depth: int):
        if depth > 5 or random.random() < 0.35:
            return rand_scalar()
        if random.random() < 0.5:
            d = {}
            for _ in range(random.randint(0, 5)):
                d[rand_text(10)] = gen(depth + 1)
            return d
        return [gen(depth + 1) for _ in range(random.randint(0, 5))]
    return gen(0)

def mutate(data: bytes) -> bytes:
    buf = bytearray(data)
    op = random.random()
    if not buf or op < 0.25:
        buf.insert(random.randint(0, len(buf)), random.getrandbits(8))
    elif op < 0.55:
        i = random.randrange(len(buf))
        buf[i] ^= 1 << random.randint(0, 7)
    elif op < 0.75:
        del buf[random.randint(0, len(buf) - 1):]
    else:
        i = random.randrange(len(buf))
        buf[i] = random.choice([0x1F, 0x5F, 0x7F, 0x9F, 0xBF, 0xDF, 0xFF, 0xF8, 0xFC])
    return bytes(buf)

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()

        # A) round trip
        if r < 0.40:
            tree = rand_tree()
            data = cbor7049.encode(tree)
            out = cbor7049.decode(data)
            if not same(out, tree):
                failure("A round_trip", {"round": i, "input_b64": b64(data),
                                         "value": repr(tree), "decoded": repr(out)})
            continue

        # B) mutated input
        if r < 0.85:
            data = mutate(cbor7049.encode(rand_tree()))
            try:
                cbor7049.decode(data)
            except cbor7049.CborError:
                pass
            except Exception:
                failure("B mutated", {"round": i, "input_b64": b64(data),
                                      "trace": traceback.format_exc()})
            continue

        # C) sequences
        items: List[Any] = [rand_tree() for _ in range(random.randint(0, 4))]
        data = b"".join(cbor7049.encode(item) for item in items)
        out = cbor7049.decode_all(data)
        if not same(out, items):
            failure("C sequence", {"round": i, "input_b64": b64(data)})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no failures)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
