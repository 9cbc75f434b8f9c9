"""Quick start: anonymize a range of identifiers and map them back."""

import torch

from cyclewalk import CycleWalkFPE, derive_key, is_permutation


def main():
    """Run quick start."""
    print("cyclewalk Quick Start")
    print("=" * 50)

    n = 1_000_003  # Number of customer ids
    key = derive_key(2024)
    fpe = CycleWalkFPE(n=n, key=key)
    print(f"Domain: [0, {n:,})")
    print(f"Key: 0x{key:016x}")
    print()

    for customer_id in [0, 1, 2, 999_999]:
        token = fpe.encrypt(customer_id)
        print(f"  id {customer_id:>9,} -> {token:>9,} -> {fpe.decrypt(token):>9,}")
    print()

    print("Shuffling the whole range on the tensor path...")
    ids = torch.arange(n, dtype=torch.long)
    tokens = fpe.encrypt_tensor(ids)
    print(f"  permutation: {is_permutation(tokens, n)}")
    print(f"  first tokens: {tokens[:8].tolist()}")
    print(f"  round trip: {torch.equal(fpe.decrypt_tensor(tokens), ids)}")


if __name__ == "__main__":
    main()
