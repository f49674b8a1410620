"""Allow ``python -m create_effect_app``."""

from create_effect_app.cli import main

if __name__ == "__main__":
    main()
