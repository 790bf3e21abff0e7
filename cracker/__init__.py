from cracker.config import load_config, ConfigError, DEFAULTS
from cracker.dictionary import load_words, validate_word, DictionaryError
from cracker.shadow import load_records, parse_record, ShadowRecord, ShadowError
from cracker.crack import crack, check_record, report, save_report, Match
