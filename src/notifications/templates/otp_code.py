"""One-time code template — the message carrying a login or verification code."""


class OTPCodeTemplate:
    template_key = "otp_code"

    @staticmethod
    def render(context: dict) -> dict:
        code = context["code"]
        minutes = context.get("ttl_minutes", 5)
        purpose = context.get("purpose", "login")
        action = {
            "signup": "finish creating your account",
            "login": "sign in",
            "verification": "verify this contact",
        }.get(purpose, "continue")
        return {
            "subject": "Your verification code",
            "body": (
                f"Your code is {code}. Use it to {action}.\n\n"
                f"It expires in {minutes} minutes and can be used once. "
                "If you did not ask for it, you can ignore this message."
            ),
            "sms": f"{code} is your verification code. Valid for {minutes} min. Do not share it.",
        }
