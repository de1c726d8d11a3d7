def csf_to_list(comma_separated_field):
    if not comma_separated_field:
        return []
    return [x.strip() for x in comma_separated_field.split(",") if x.strip()]


def env_flag(value, default=False):
    if value is None or value == '':
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')
