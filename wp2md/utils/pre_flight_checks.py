import os


class PreFlightCheckError(Exception):
    """Custom exception for pre-flight check failures."""
    pass


def run_pre_flight_checks(config: dict):
    """
    Verifies that the configuration is usable before any parsing starts.

    Args:
        config: The application configuration dictionary.

    Raises:
        PreFlightCheckError: If any check fails.
    """
    print("[INFO] Running pre-flight checks...")

    input_path = config.get("export", {}).get("input")
    if not input_path:
        raise PreFlightCheckError("No export file configured ('export.input').")
    if not os.path.isfile(input_path):
        raise PreFlightCheckError(f"Export file not found: {input_path}")

    output_dir = config.get("export", {}).get("output")
    if not output_dir:
        raise PreFlightCheckError("No output directory configured ('export.output').")
    if os.path.exists(output_dir) and not os.path.isdir(output_dir):
        raise PreFlightCheckError(f"Output path exists and is not a directory: {output_dir}")

    # Check: language variants
    languages = config.get("languages") or []
    if not languages:
        raise PreFlightCheckError("At least one language must be configured.")
    codes = [lang.get("code") for lang in languages]
    if any(not code for code in codes):
        raise PreFlightCheckError("Every language needs a 'code'.")
    if len(set(codes)) != len(codes):
        raise PreFlightCheckError(f"Language codes must be unique: {codes}")
    native = [lang for lang in languages if not lang.get("meta_prefix")]
    if len(native) != 1:
        raise PreFlightCheckError(
            "Exactly one language must read the native post fields (meta_prefix: null)."
        )

    print("[INFO] Pre-flight checks passed successfully.")
