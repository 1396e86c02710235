import errno
import os
import sys
from typing import List, Optional

from mixramp.config import MixRampConfig
from mixramp.dsp.replaygain import ReplayGainAnalyzer
from mixramp.exceptions import AllocationError, MixRampError, UsageError
from mixramp.streaming import ChunkLoader, RampExtractor, RampResult, emit
from mixramp.utils.logger import get_logger, setup_logging
from mixramp.validation import program_name, validate_arguments

logger = get_logger(__name__)


def analyze_file(path: str, config: Optional[MixRampConfig] = None) -> RampResult:
    """Compute the MixRamp tables for one audio file."""
    config = config or MixRampConfig()
    with ChunkLoader(path) as loader:
        analyzer = ReplayGainAnalyzer(loader.sample_rate)
        return RampExtractor(config).run(loader, analyzer)


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv

    config = MixRampConfig.from_env()
    setup_logging(config.log_level, config.log_file)

    try:
        path = validate_arguments(argv)
        logger.info(f"Analyzing {path}")
        result = analyze_file(path, config)
    except UsageError as e:
        print(str(e), file=sys.stderr)
        return e.exit_code
    except MixRampError as e:
        print(f"{program_name(argv)}: {e}", file=sys.stderr)
        return e.exit_code
    except MemoryError:
        print(os.strerror(errno.ENOMEM), file=sys.stderr)
        return AllocationError.exit_code

    emit(result, reference_db=config.reference_db)
    return 0


if __name__ == "__main__":
    sys.exit(main())
