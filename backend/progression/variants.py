import random
from learning_core.models import VARIANT_SETS


def get_unused_quiz_variant(used_variants, variants=VARIANT_SETS, rng=random):
    """
    Pick uniformly among variants not served yet; once every variant has
    been served, pick uniformly among all of them again.
    """
    variants = list(variants)
    unused = [v for v in variants if v not in (used_variants or [])]
    return rng.choice(unused or variants)
