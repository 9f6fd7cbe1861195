from os import isatty
from sys import stdin, stdout, stderr, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession

from .util import CalcError
from .session import ErrorPolicy, Session
from .keypad import Keypad


class InteractiveInput:
    def __init__(self, prompt, session):
        self.prompt = prompt
        self.session = session

    def _toolbar(self):
        # Expression typed so far; blank keeps the toolbar from collapsing.
        return self.session.expression_text or ' '

    def _rprompt(self):
        return str(self.session.state)

    def __iter__(self):
        try:
            prompt = PromptSession(message=self.prompt,
                                   vi_mode=True,
                                   enable_suspend=True,
                                   history=None,
                                   bottom_toolbar=self._toolbar,
                                   rprompt=self._rprompt,
                                   prompt_continuation=' ' * len(self.prompt),
                                   mouse_support=False,
                                   erase_when_done=False)
            while True:
                yield prompt.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the keypad calculator.

    Every line of input is a run of keystrokes on the same calculator.
    '''

    DEFAULT_PROMPT = '> '
    LOG_FORMAT = '%(name)s: %(message)s'

    def dumper(self):
        '''
        Dump every key, its button press, and the state it leaves.
        '''
        keypad = Keypad()
        print('<key>\t<event>\t<state>')
        for line in self.args.expressions:
            try:
                for match in keypad.lex(line):
                    if not keypad.isfeedable(match):
                        continue
                    event = keypad.event(match)
                    self.session.feed(event)
                    print(repr(match.group(0)), event, self.session.state,
                          sep='\t')
            except CalcError as e:
                print(e.args[0], file=stderr)

    def executor(self):
        '''
        Run calculator, showing expression and display after each line.
        '''
        keypad = Keypad()
        for line in self.args.expressions:
            try:
                for event in keypad.events_from(line):
                    self.session.feed(event)
            # Rest of the line is dropped, what came before it stays.
            except CalcError as e:
                print(e.args[0], file=stderr)
            self.show()

    def show(self):
        # Interactively, the expression is already in the toolbar.
        if self.session.expression_text and not self._interactive():
            print(self.session.expression_text)
        print(self.session.display_text, flush=True)

    def raw_grammar(self):
        '''
        Print current internally defined keys.
        '''
        print(Keypad.KEY)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    session=self.session)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='Keypad calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-m', '--max-digits',
                                          type=int,
                                          default=Session.DEFAULT_MAX_DIGITS)
        self.argument_parser.add_argument('-k', '--keep-expression',
                                          action='store_true',
                                          help='keep expression after =')
        self.argument_parser.add_argument('-b', '--block-errors',
                                          action='store_true',
                                          help='refuse input after an '
                                               'invalid key until cleared')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(format=self.LOG_FORMAT,
                            level=logging.DEBUG if self.args.verbose
                            else logging.WARNING)
        policy = ErrorPolicy.BLOCK if self.args.block_errors else None
        try:
            self.session = Session(max_digits=self.args.max_digits,
                                   keep_expression=self.args.keep_expression,
                                   error_policy=policy)
        except CalcError as e:
            print(e.args[0], file=stderr)
            exit(2)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
