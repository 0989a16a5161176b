import pytest


@pytest.fixture
def mapping_oracle():
    """Build an oracle answering from ``mapping`` and recording every call."""

    def build(mapping, calls=None):
        def oracle(name, surrounding_code):
            if calls is not None:
                calls.append((name, surrounding_code))
            return mapping.get(name, name)

        return oracle

    return build


@pytest.fixture
def identity_oracle():
    def oracle(name, surrounding_code):
        return name

    return oracle
