import textwrap

import pytest
from click.testing import CliRunner

SAMPLE_DOCUMENT = textwrap.dedent(
    """
    # 📌 Quick Summary

    Caching stores results so repeated work is avoided.

    ## 📚 Introduction

    Why caching matters.

    ### History

    Memoization predates modern CPUs.

    ## 🧩 Core Concepts

    - **Hit**: the value is in the cache
    - **Miss**: the value must be computed

    ```python
    cache = {}
    ```

    ## 🔄 How It Works

    | Step | Action |
    |------|--------|
    | 1 | Lookup |
    | 2 | Store |

    > **Note:** invalidation is hard.

    ---

    ## 📝 Interactive Quiz

    ### Question 1

    What happens on a cache miss?

    - A) The value is returned from the cache
    - B) The value is computed and stored

    <details>
    <summary>Show answer</summary>

    **Answer:** B) The value is computed and stored
    </details>

    ### Question 2

    Which structure holds the cache above?

    <details>
    <summary>Show answer</summary>

    Answer: dict
    </details>
    """
).lstrip()


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def sample_document() -> str:
    """A generated explanation with the usual sections and a two-question quiz."""
    return SAMPLE_DOCUMENT
