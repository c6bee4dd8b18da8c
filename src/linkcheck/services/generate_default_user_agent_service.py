import platform

# platform.system() -> the platform token of a desktop Chrome agent
PLATFORM_TOKENS = {
    "Windows": "Windows NT 10.0; Win64; x64",
    "Darwin": "Macintosh; Intel Mac OS X 10_15_7",
    "Linux": "X11; Linux x86_64",
}


def generate_default_user_agent(chrome_version: str = "120.0.0.0") -> str:
    """
    Builds a Chrome-like User-Agent for the current operating system.
    Some servers reject requests without a browser agent, which would
    show up as false broken links.
    """
    os_part = PLATFORM_TOKENS.get(platform.system(), "Unknown OS")
    return (
        f"Mozilla/5.0 ({os_part}) AppleWebKit/537.36 (KHTML, like Gecko) "
        f"Chrome/{chrome_version} Safari/537.36"
    )
