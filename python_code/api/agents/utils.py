JSON_OBJECT_FORMAT = {"type": "json_object"}


def get_chatbot_response(client, model_name, messages, temperature=0, max_tokens=2000, response_format=None):
    request = {
        "model": model_name,
        "messages": [{"role": entry["role"], "content": entry["content"]} for entry in messages],
        "temperature": temperature,
        "top_p": 0.8,
        "max_tokens": max_tokens,
    }
    if response_format is not None:
        request["response_format"] = response_format

    response = client.chat.completions.create(**request).choices[0].message.content

    return response


def double_check_json_output(client, model_name, json_string, required_keys=(), max_tokens=2000):
    keys = ", ".join(f'"{key}"' for key in required_keys)
    prompt = f""" You will check this json string and correct any mistakes that will make it invalid. Then you will return the corrected json string. Nothing else.
    If the Json is correct just return it.
    {f"The corrected json object must contain the keys {keys}." if keys else ""}

    Do NOT return a single letter outside of the json string.

    {json_string}
    """

    messages = [{"role": "user", "content": prompt}]

    reviewed = get_chatbot_response(client, model_name, messages, max_tokens=max_tokens, response_format=JSON_OBJECT_FORMAT)

    return reviewed
