from dotenv import load_dotenv
import os
import json
import logging
from .utils import JSON_OBJECT_FORMAT, get_chatbot_response, double_check_json_output
from openai import OpenAI
load_dotenv()

logger = logging.getLogger(__name__)

# a name plus a short chain of thought
ANSWER_MAX_TOKENS = 300


class NamingAgent():
    def __init__(self, client=None, model_name=None):
        self.client = client or OpenAI(
            api_key=os.getenv("RUNPOD_TOKEN"),
            base_url=os.getenv("RUNPOD_CHATBOT_URL"),
            timeout=float(os.getenv("RENAME_ORACLE_TIMEOUT", "60")),
        )
        self.model_name = model_name or os.getenv("MODEL_NAME")

    def get_response(self, current_name, surrounding_code):
        system_prompt = """
            You are a senior Python engineer helping to make obfuscated or minified code readable.
            You will get the name of one variable, function, class, parameter or import and a piece of the code around it.
            Your task is to suggest a descriptive name for it, based on how it is used in the code.

            Rules:
            - The name must be a valid Python identifier. No spaces, no dots, no quotes.
            - Use snake_case for variables, functions and parameters and PascalCase for classes.
            - If the current name is already descriptive, return it unchanged.

            Your output should be in a structured json format like so. each key is a string and each value is a string. Make sure to follow the format exactly:
            {
            "chain of thought": write down your thoughts about what this name holds and how it is used.
            "new_name": the name you suggest. Only write the name.
            }
            """

        prompt = f"""
        Rename `{current_name}` in the code below.

        Code:
        {surrounding_code}
        """

        input_messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

        chatbot_output = get_chatbot_response(
            self.client,
            self.model_name,
            input_messages,
            max_tokens=ANSWER_MAX_TOKENS,
            response_format=JSON_OBJECT_FORMAT,
        )
        new_name = self.postprocess(chatbot_output)
        logger.debug("naming agent suggested %r for %r", new_name, current_name)
        return new_name

    def postprocess(self, raw_response):
        try:
            parsed = json.loads(raw_response)
        except json.JSONDecodeError:
            logger.debug("repairing malformed json from the model: %r", raw_response)
            repaired = double_check_json_output(
                self.client, self.model_name, raw_response, required_keys=("new_name",), max_tokens=ANSWER_MAX_TOKENS
            )
            parsed = json.loads(repaired)

        return str(parsed['new_name']).strip()
