import re
import logging
import httpx

logger = logging.getLogger(__name__)

class TelegramConfigValidator:
    """
    Validates the Telegram bot configuration.

    Performs multi-layer validation:
    1. Schema validation (required fields, types)
    2. Format validation (token and username patterns)
    3. Business logic validation (timeouts, page size)
    4. Live API validation (getMe answers for this token)
    """

    # Format: 123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaw (example)
    BOT_TOKEN_PATTERN = re.compile(r'^\d{5,12}:[A-Za-z0-9_-]{30,}$')

    # Bot usernames are 5-32 characters and must end in "bot"
    BOT_USERNAME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9_]{2,29}[Bb][Oo][Tt]$')

    MIN_TIMEOUT = 1.0
    MAX_TIMEOUT = 60.0

    # Each listed file takes one keyboard row; Telegram caps keyboards at 100 buttons
    MAX_PAGE_SIZE = 20

    def __init__(self, config):
        self.config = config
        self.errors = []
        self.warnings = []

    def validate(self, allow_errors=False, skip_api_check=False) -> bool:
        """
        Validates the Telegram configuration.

        Args:
            allow_errors: If True, returns True even if there are validation errors.
            skip_api_check: If True, skips the live getMe call.

        Returns:
            bool: True if config is valid (or has only warnings), False otherwise.
        """
        self.errors = []
        self.warnings = []

        self._validate_schema()

        if not self.errors:
            self._validate_formats()

        if not self.errors:
            self._validate_business_rules()

        if not self.errors and not skip_api_check:
            self._validate_live_api()

        if self.errors:
            for error in self.errors:
                logger.error(f"Telegram config validation error: {error}")
        if self.warnings:
            for warning in self.warnings:
                logger.warning(f"Telegram config validation warning: {warning}")

        logger.info(f"Telegram config validation completed: {len(self.errors)} error(s), {len(self.warnings)} warning(s)")

        if not allow_errors:
            return len(self.errors) == 0
        else:
            logger.info(f"Validation completed with errors allowed; returning True even if {len(self.errors)} errors exist.")
            return True

    def _validate_schema(self):
        """Validates required fields exist and have correct types."""
        if not isinstance(self.config, dict):
            self.errors.append("Config must be a dictionary")
            return

        required_fields = {
            'bot_token': str,
            'bot_username': str,
        }

        for field, expected_type in required_fields.items():
            if field not in self.config:
                self.errors.append(f"Missing required field: '{field}'")
                continue

            value = self.config[field]

            if value is None or value == '':
                self.errors.append(f"Field '{field}' cannot be empty")
                continue

            if not isinstance(value, expected_type):
                self.errors.append(
                    f"Field '{field}' must be {expected_type.__name__}, got {type(value).__name__}"
                )

        optional_fields = {
            'request_timeout': (int, float),
            'page_size': int,
        }

        for field, expected_type in optional_fields.items():
            value = self.config.get(field)
            if value is not None and not isinstance(value, expected_type):
                self.errors.append(
                    f"Optional field '{field}' has wrong type {type(value).__name__}"
                )

    def _validate_formats(self):
        """Validates field formats and patterns."""
        bot_token = self.config['bot_token']
        if not self.BOT_TOKEN_PATTERN.match(bot_token):
            self.warnings.append(
                "Bot token doesn't match expected Telegram token format. "
                "This might be a test token or incorrectly formatted."
            )

        bot_username = self.config['bot_username'].lstrip('@')
        if not self.BOT_USERNAME_PATTERN.match(bot_username):
            self.warnings.append(
                f"Bot username '{bot_username}' doesn't look like a Telegram bot username; share links may not work"
            )

    def _validate_business_rules(self):
        """Validates business logic and constraints."""
        timeout = self.config.get('request_timeout')
        if timeout is not None:
            if timeout < self.MIN_TIMEOUT:
                self.errors.append(f"request_timeout ({timeout}) must be at least {self.MIN_TIMEOUT} seconds")
            elif timeout > self.MAX_TIMEOUT:
                self.warnings.append(
                    f"request_timeout ({timeout}) is longer than Telegram waits for a webhook answer"
                )

        page_size = self.config.get('page_size')
        if page_size is not None:
            if page_size < 1:
                self.errors.append(f"page_size ({page_size}) must be at least 1")
            elif page_size > self.MAX_PAGE_SIZE:
                self.warnings.append(
                    f"page_size ({page_size}) is larger than recommended ({self.MAX_PAGE_SIZE})"
                )

    def _validate_live_api(self):
        """Validates the token against the live Bot API (getMe)."""
        api_base = self.config.get('api_base') or "https://api.telegram.org"
        url = f"{api_base}/bot{self.config['bot_token']}/getMe"

        try:
            with httpx.Client(timeout=10.0) as client:
                response = client.get(url)
                if response.status_code == 200:
                    me = response.json().get('result', {})
                    expected = self.config['bot_username'].lstrip('@').lower()
                    if me.get('username', '').lower() != expected:
                        self.warnings.append(
                            f"Token belongs to @{me.get('username')}, not @{expected}"
                        )
                    return True
                elif response.status_code == 401:
                    self.errors.append("Bot token is invalid or unauthorized.")
                    return False
                else:
                    self.errors.append(
                        f"Unexpected response from Telegram API when validating bot token: "
                        f"HTTP {response.status_code}"
                    )
                    return False
        except httpx.RequestError as e:
            self.errors.append(f"Failed to validate bot token: {str(e)}")
            return False

    def get_errors(self):
        """Returns list of validation errors."""
        return self.errors.copy()

    def get_warnings(self):
        """Returns list of validation warnings."""
        return self.warnings.copy()

    def get_validation_report(self):
        """Returns a formatted validation report."""
        report = []

        if not self.errors and not self.warnings:
            report.append("[+] Configuration is valid")
        else:
            if self.errors:
                report.append(f"[x] {len(self.errors)} error(s) found:")
                for error in self.errors:
                    report.append(f"  - {error}")

            if self.warnings:
                report.append(f"[!] {len(self.warnings)} warning(s):")
                for warning in self.warnings:
                    report.append(f"  - {warning}")

        return "\n".join(report)
