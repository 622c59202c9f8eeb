from rich.pretty import pprint

from libcli import *

__styles__ = {"command-name": "bold green"}


@command("greet", "say hello", aliases=("hi",), options=[
    Option.string("name", default="world", description="who to greet"),
    Option.boolean("shout", aliases=["loud"], description="use capitals"),
])
def greet(command, cli, tokens, options):
    pprint(options)
    message = "hello, %s!" % options["name"]
    print(message.upper() if options.get("shout") else message)


@greet.command("twice", "say hello two times", options=[{"kind": "number", "name": "count", "default": "2"}])
def twice(command, cli, tokens, options):
    pprint(options)


if __name__ == '__main__':
    cli = CLI("demo", colorful=True)
    cli.add_slash_command("greet", greet.validate(), aliases=greet.aliases)
    for line in ("greet --name=Alice --loud", "hi twice --count=3", "greet --nme=Bob", ""):
        if (message := cli.run(line)) is not None:
            print(message)
