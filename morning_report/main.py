"""
Command-line entry point for the Cyber Morning Report aggregator.

Generates one report and writes it as JSON:
1. Load configuration (config.yaml, optional)
2. Pick search API or feed strategy
3. Fetch, filter, classify and deduplicate items
4. Print or save the report

Designed to run via CRON or a shell (single execution, then exit).
"""
import os
import sys
import json
import logging
from pathlib import Path

from morning_report.config import ConfigError, ConfigLoader
from morning_report.models import AggregatorConfig
from morning_report.report import ReportAssembler

logger = logging.getLogger(__name__)


def load_config(config_path: Path) -> AggregatorConfig:
    """
    Load configuration, falling back to built-in defaults.

    A missing file is not an error; an invalid one is.
    """
    if not config_path.exists():
        logger.info(f"No configuration at {config_path}, using defaults")
        return AggregatorConfig()
    return ConfigLoader(config_path).load()


def main():
    """
    Main entry point for command-line execution.

    Usage:
        python -m morning_report.main [HOURS]

    Environment:
        CONFIG_PATH: YAML config file (default: config.yaml)
        WINDOW_HOURS: Window size when HOURS is not given
        OUTPUT_PATH: Write JSON here instead of stdout
        PERPLEXITY_API_KEY: Enables the search API strategy
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config_path = Path(os.getenv('CONFIG_PATH', 'config.yaml'))
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level.value.upper())

    hours = sys.argv[1] if len(sys.argv) > 1 else os.getenv('WINDOW_HOURS')
    output_path = os.getenv('OUTPUT_PATH')

    try:
        assembler = ReportAssembler(
            config=config,
            api_key=os.getenv('PERPLEXITY_API_KEY'),
        )
        report = assembler.generate(hours)
        payload = json.dumps(report.to_dict(), ensure_ascii=False, indent=2)

        if output_path:
            Path(output_path).write_text(payload + "\n", encoding="utf-8")
            logger.info(f"Report written to {output_path}")
        else:
            print(payload)
        sys.exit(0)
    except Exception as e:
        logger.error(f"Report generation failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
