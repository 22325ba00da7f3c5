"""CLI Commands: status, auth, config"""

import os

from gh_helper.config import Config, ENV_OVERRIDES, get_config_path
from gh_helper.llm import LLMError, OllamaClient, ClaudeCodeClient, ClaudeClient
from gh_helper.output import bold, dim, info, success, warning, print_success, print_warning


def display_config(config: Config) -> int:
    """Display current configuration."""
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .ghhelperrc found)")

    overrides = [var for var in ENV_OVERRIDES if os.environ.get(var)]
    if overrides:
        print(f"  {dim('Environment overrides:')}")
        for var in overrides:
            print(f"    {var}={os.environ[var]}")

    print()
    print(f"  {bold('Settings:')}")
    for key, value in config.to_dict().items():
        shown = str(value).lower() if isinstance(value, bool) else str(value)
        print(f"    {key + ':':<28}{info(shown)}")
    if config.analysis_model is None:
        print(f"    {'analysis_model:':<28}{info('backend default')}")
    if config.synthesis_model is None:
        print(f"    {'synthesis_model:':<28}{info('backend default')}")

    print(f"\n  {dim('Config locations:')}")
    print("    Local:  .ghhelperrc (in current directory)")
    print("    Global: ~/.ghhelperrc\n")
    return 0


def _ollama_status(config: Config) -> bool:
    try:
        client = OllamaClient(config=config, verify=False)
        available = client.list_models()
    except LLMError as e:
        print(f"  {warning('Ollama:')} {str(e).splitlines()[0]}")
        return False

    missing = [m for m in (client.analysis_model, client.synthesis_model)
               if not client.has_model(m, available)]
    if missing:
        print(f"  {warning('Ollama:')} running, missing models: {', '.join(missing)}")
        for model in missing:
            print(dim(f"    ollama pull {model}"))
        return False

    print(f"  {success('Ollama:')} running, models {client.analysis_model} / {client.synthesis_model} available")
    return True


def _claude_cli_status(config: Config) -> bool:
    try:
        client = ClaudeCodeClient(config=config)
    except LLMError as e:
        print(f"  {warning('Claude Code:')} {str(e).splitlines()[0]}")
        return False

    available, reason = client.check_availability()
    if not available:
        print(f"  {warning('Claude Code:')} {reason}")
        return False
    print(f"  {success('Claude Code:')} installed")
    return True


def _claude_api_status(config: Config) -> bool:
    try:
        ClaudeClient(config=config)
    except LLMError as e:
        print(f"  {warning('Claude API:')} {str(e).splitlines()[0]}")
        return False
    print(f"  {success('Claude API:')} API key configured")
    return True


STATUS_CHECKS = {
    "ollama": _ollama_status,
    "claude-cli": _claude_cli_status,
    "claude": _claude_api_status,
}


def run_status(config: Config) -> int:
    """Check which backends can be used."""
    print(f"\n{bold('gh-helper - Backend Status')}\n")

    if config.provider == "auto":
        providers = list(STATUS_CHECKS)
    else:
        providers = [config.provider]

    results = [STATUS_CHECKS[p](config) for p in providers]

    print()
    if any(results):
        print_success("A backend is ready. You can now use: gh-helper commit")
    else:
        print_warning("No backend ready")
        print("\nTo set up Ollama:")
        print("  1. Install Ollama: https://ollama.com")
        print("  2. Pull the models:")
        print(dim(f"     ollama pull {config.synthesis_model or OllamaClient.DEFAULT_SYNTHESIS_MODEL}"))
        print(dim(f"     ollama pull {config.analysis_model or OllamaClient.DEFAULT_ANALYSIS_MODEL}"))
        print("  3. Ensure Ollama is running: ollama serve")
        print("\nOr install Claude Code and run: claude login")
    return 0


def run_auth(config: Config, check: bool = False, login: bool = False) -> int:
    """Claude Code authentication helper."""
    if login:
        print(info("To authenticate with Claude Code, run:"))
        print("  claude login")
        print(dim("This opens your browser to authenticate with your Claude subscription."))
        return 0

    if not check:
        print(f"\n{bold('gh-helper - Claude Authentication')}\n")

    try:
        available, reason = ClaudeCodeClient(config=config).check_availability()
    except LLMError as e:
        available, reason = False, str(e).splitlines()[0]

    if available:
        print_success("Claude Code is installed and available")
        print(dim("Using your Claude subscription for commit message generation"))
    else:
        print_warning("Claude Code authentication required")
        print(f"  Error: {reason}")
        print(dim("  Run: claude login"))

    if not check:
        print(f"\n{info('Available commands:')}")
        print("  gh-helper auth --check    Check authentication status")
        print("  gh-helper auth --login    Show login instructions")
    return 0
