"""Shared rule sets: user roles and nested shipping rules."""
from declarative_rules import RuleSet, apply_rules


# Simple use case: user roles
def is_admin(ctx):
    return ctx["user"]["username"] == "admin"


def is_moderator(ctx):
    return ctx["user"]["is_moderator"]


def is_power_user(ctx):
    return ctx["user"]["post_count"] > 100


user_role_rules = (
    RuleSet("user roles")
    .add_rule(is_admin, "Administrator")
    .add_rule(is_moderator, "Moderator")
    .add_rule(is_power_user, "Power User")
    .set_default("Member")
)


# Advanced use case: shipping cost rules whose values resolve a second rule set
def is_heavy_and_international(args):
    return args["weight"] > 50 and args["destination"] == "international"


def is_fragile(args):
    return args["is_fragile"]


def is_high_value(args):
    return args["is_high_value"]


description_rules = (
    RuleSet("shipping description")
    .add_rule(is_high_value, "Requires signature and insurance.")
    .add_rule(is_fragile, "Handled with extreme care.")
    .set_default("Standard international handling.")
)


def _shipping_info(cost):
    def build(args):
        return {"cost": cost, "description": apply_rules(args, description_rules)}
    return build


shipping_cost_rules = (
    RuleSet("shipping cost")
    .add_rule(is_heavy_and_international, _shipping_info(150.0))
    .add_rule(is_fragile, _shipping_info(55.0))
    .set_default(_shipping_info(25.0))
)
