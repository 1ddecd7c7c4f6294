import os

# Configurações globais de ambiente
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

# Limite de caracteres da mensagem (o host original corta em 7000)
SLACK_MESSAGE_MAX_LENGTH = int(os.getenv("SLACK_MESSAGE_MAX_LENGTH", "7000"))
SLACK_TIMEOUT_SECONDS = int(os.getenv("SLACK_TIMEOUT_SECONDS", "10"))

# Só mostra o autor do commit quando o build falhou
SLACK_HIDE_AUTHOR_ON_SUCCESS = os.getenv("FASTLANE_SLACK_HIDE_AUTHOR_ON_SUCCESS", "false").lower() == "true"

DEFAULT_USERNAME = "fastlane"
DEFAULT_ICON_URL = "https://fastlane.tools/assets/img/fastlane_icon.png"

DEFAULT_PAYLOADS = (
    "lane",
    "test_result",
    "git_branch",
    "git_author",
    "last_git_commit",
    "last_git_commit_hash",
)

COLORS = {
    True: "good",
    False: "danger",
}

MRKDWN_IN = ["pretext", "text", "fields", "message"]

# Variável de ambiente usada como fallback de cada opção
OPTION_ENV_NAMES = {
    "message": "FL_SLACK_MESSAGE",
    "pretext": "FL_SLACK_PRETEXT",
    "channel": "FL_SLACK_CHANNEL",
    "thread_timestamp": "FL_SLACK_THREAD_TIMESTAMP",
    "slack_url": "SLACK_URL",
    "username": "FL_SLACK_USERNAME",
    "use_webhook_configured_username_and_icon": "FL_SLACK_USE_WEBHOOK_CONFIGURED_USERNAME_AND_ICON",
    "icon_url": "FL_SLACK_ICON_URL",
    "payload": "FL_SLACK_PAYLOAD",
    "default_payloads": "FL_SLACK_DEFAULT_PAYLOADS",
    "attachment_properties": "FL_SLACK_ATTACHMENT_PROPERTIES",
    "success": "FL_SLACK_SUCCESS",
    "fail_on_error": "FL_SLACK_FAIL_ON_ERROR",
    "link_names": "FL_SLACK_LINK_NAMES",
}

# Branch vem do CI antes de perguntar ao git
CI_BRANCH_ENV_NAMES = (
    "GIT_BRANCH",
    "BRANCH_NAME",
    "TRAVIS_BRANCH",
    "BITRISE_GIT_BRANCH",
    "CI_BUILD_REF_NAME",
    "CI_COMMIT_REF_NAME",
    "WERCKER_GIT_BRANCH",
    "BUILDKITE_BRANCH",
    "APPCENTER_BRANCH",
    "CIRCLE_BRANCH",
)

LANE_NAME_ENV = "FASTLANE_LANE_NAME"

REMEDIATION_MESSAGE = (
    "Maybe the integration has no permission to post on this channel? "
    "Try removing the channel parameter in your Fastfile, this is usually caused by "
    "a misspelled or changed group/channel name or an expired SLACK_URL"
)
