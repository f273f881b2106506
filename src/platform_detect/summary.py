from platform_detect.pipeline.parser import parse


def parse_user_agent(ua: str) -> dict:
    """Browser and OS summary of a user agent, for enriching log records.

    ``{'browser': 'Chrome 109.0.0.0', 'os': 'Windows'}``; either value is
    None when it could not be detected.
    """
    if not ua:
        return {'browser': None, 'os': None}

    record = parse(ua)
    browser = record.name
    if browser and record.version:
        browser = f'{browser} {record.version}'
    return {'browser': browser, 'os': record.os.family}
